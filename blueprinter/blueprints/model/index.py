"""Model blueprint: ``name:type`` arguments become attributes and relationships."""

from blueprinter.scaffolder.hooks import model_locals

description = "Generates an ember-data model."


def locals(context):
    return model_locals(context)
