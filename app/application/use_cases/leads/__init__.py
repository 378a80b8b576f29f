"""Lead use cases."""

from app.application.use_cases.leads.lead_operations import LeadService

__all__ = ["LeadService"]
