description = "Generates a controller."
