description = "Generates an ember-data adapter unit test."
