description = "Generates an initializer."
