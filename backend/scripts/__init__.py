"""
Operator scripts.

- migrations/: one-shot schema changes, safe to re-run
- check_schema.py / setup_conversations_schema.py: schema inspection and setup
- debug/: manual smoke checks against the backend API and Deepgram
"""
