from blueprinter.scaffolder.hooks import resolve_base_class

description = "Generates an ember-data serializer."


def locals(context):
    return resolve_base_class(
        context,
        default_class="DS.RESTSerializer",
        default_import="import DS from 'ember-data';",
    )
