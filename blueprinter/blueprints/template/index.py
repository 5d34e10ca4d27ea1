description = "Generates a template."
