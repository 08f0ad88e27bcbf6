LOGGER_NAME = "circuit_racer"
