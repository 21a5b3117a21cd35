"""
Mailchimp integration - API client, OAuth, data access and dashboard summaries
"""
