description = "Generates an acceptance test for a feature."


def locals(context):
    depth = 1 + len(context.entity.parents)
    return {"test_folder_root": "/".join([".."] * depth)}
