from .contact_lookup import ContactLookup, ContactMatch, ContactRecord, parse_contacts_for_lookup

__all__ = ["ContactLookup", "ContactMatch", "ContactRecord", "parse_contacts_for_lookup"]
