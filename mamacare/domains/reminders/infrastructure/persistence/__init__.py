# Persistence adapters
