description = ""

# def locals(context):
#     # Return custom template variables here.
#     return {
#         "foo": context.option("foo"),
#     }

# def after_install(context):
#     # Perform extra work here.
#     pass
