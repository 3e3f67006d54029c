"""
Chat API layer.

Responsibilities:
- Validate incoming message histories.
- Refuse conversations that are not about food or dining.
- Drive one provider turn end to end and build the response envelope.
"""
