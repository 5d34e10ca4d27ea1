from blueprinter.scaffolder.hooks import resolve_base_class

description = "Generates an ember-data adapter."


def locals(context):
    return resolve_base_class(
        context,
        default_class="DS.RESTAdapter",
        default_import="import DS from 'ember-data';",
    )
