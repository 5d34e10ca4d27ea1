description = "Generates a service."
