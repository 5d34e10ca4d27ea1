from blueprinter.scaffolder.hooks import model_locals

description = "Generates a model unit test."


def locals(context):
    return model_locals(context)
