"""CRM authorization and audit-trail service."""
