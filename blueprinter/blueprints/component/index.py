"""Component blueprint.

Pods live under a ``components`` directory inside the pod prefix; the
classic layout splits the module and its template across
``components/`` and ``templates/components/``.
"""

import posixpath

from blueprinter.scaffolder.context import join_path

description = "Generates a component. Name must contain a hyphen."


def component_dir(context, *, test=False):
    if context.structure.is_pod:
        prefix = context.structure.test_prefix if test else context.structure.base_prefix
        return join_path(prefix, "components", context.entity.spellings.dash)
    return join_path("components", *context.entity.parents)


def template_dir(context):
    if context.structure.is_pod:
        return component_dir(context)
    return join_path("templates", "components", *context.entity.parents)


def file_map_tokens(context):
    return {
        "__path__": component_dir,
        "__templatepath__": template_dir,
        "__templatename__": lambda ctx: "template" if ctx.structure.is_pod else ctx.entity.leaf,
    }


def locals(context):
    if context.structure.is_pod:
        template_import = "./template"
    else:
        template = join_path(template_dir(context), context.entity.leaf)
        template_import = posixpath.relpath(template, component_dir(context))
    return {"template_import": template_import}
