description = "Generates a view subclass."
