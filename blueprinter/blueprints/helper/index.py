description = "Generates a helper function."
