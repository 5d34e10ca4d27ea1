"""Re-exports an addon component from the consuming application's tree."""

from blueprinter.scaffolder.context import join_path

description = "Generates a component re-export inside an addon's app tree."


def file_map_tokens(context):
    return {"__path__": _app_path}


def _app_path(context):
    if context.structure.is_pod:
        return join_path(context.structure.base_prefix, "components", context.entity.spellings.dash)
    return join_path("components", *context.entity.parents)


def locals(context):
    if context.structure.is_pod:
        module = join_path(_app_path(context), "component")
    else:
        module = join_path(_app_path(context), context.entity.leaf)
    return {"addon_module": f"{context.config.module_prefix}/{module}"}
