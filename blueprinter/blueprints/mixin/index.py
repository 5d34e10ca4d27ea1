description = "Generates a mixin."
