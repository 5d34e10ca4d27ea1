description = "Generates a blueprint and definition."
