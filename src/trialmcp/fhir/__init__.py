"""FHIR collaborators: request context, Patient fetch, demographic extraction."""
