# Application layer: DTOs, ports, dispatcher and reminder jobs
