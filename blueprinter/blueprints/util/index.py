description = "Generates a simple utility module/function."
