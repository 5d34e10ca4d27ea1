description = "Generates a mock api endpoint in /api prefix."
