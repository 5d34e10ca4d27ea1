"""Route blueprint: a route module, its template, and a router entry."""

from blueprinter.scaffolder.hooks import add_route_to_router, remove_route_from_router

description = "Generates a route and registers it with the router."


def file_map_tokens(context):
    return {
        "__templatepath__": _template_path,
        "__templatename__": _template_name,
    }


def _template_path(context):
    if context.structure.is_pod:
        return context.pod_dir()
    return context.classic_dir("templates")


def _template_name(context):
    if context.structure.is_pod:
        return "template"
    return context.entity.leaf


def after_install(context):
    add_route_to_router(context)


def after_uninstall(context):
    remove_route_from_router(context)
