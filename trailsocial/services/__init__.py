"""
High-level use cases for the trailsocial backend.

Each service module orchestrates repositories to implement business rules
(register, authenticate, follow, list likes, etc.). A transport layer should
call these services instead of touching the session or the models directly.
"""
