from blueprinter.scaffolder.context import join_path

description = "Generates a component integration test."


def file_map_tokens(context):
    return {"__testPath__": _test_path}


def _test_path(context):
    if context.structure.is_pod:
        return join_path(context.structure.test_prefix, "components", context.entity.spellings.dash)
    return join_path("components", *context.entity.parents)
