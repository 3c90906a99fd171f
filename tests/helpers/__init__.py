# Shared test helpers
