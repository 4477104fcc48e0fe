"""trialmcp: clinical-trial search tools for LLM agents, personalized with FHIR demographics."""

__version__ = "0.1.0"
