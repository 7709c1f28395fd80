"""Graph schema for the relationship engine.

Defines the node labels, relationship types and indices of the property
graph. Schema is applied idempotently on startup.

Node Labels:
    :User        - Registered user (created by the identity collaborator)
    :Group       - Group with a cached member_count
    :JoinRequest - Pending request of a user to enter a private group
    :Post        - Group post (owned by the content collaborator, read only)

Relationship Types:
    :FRIENDS_WITH - User -> User, always present in both directions
    :REQUESTED    - User -> User, pending friend request
    :MEMBER_OF    - User -> Group, carries role and joined_at
    :ADMIN_OF     - User -> Group, co-exists with MEMBER_OF(role=admin)
    :SUBMITTED    - User -> JoinRequest
    :FOR_GROUP    - JoinRequest -> Group
    :POSTED_IN    - Post -> Group
"""

# Group attributes an admin may change. Used as a whitelist when building
# SET clauses, since property keys cannot be passed as query parameters.
MUTABLE_GROUP_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "description",
        "category",
        "rules",
        "cover_image",
        "privacy",
        "is_active",
    }
)

# Cypher statements executed on graph initialization.
# An "already indexed" error on restart is expected and ignored.
SCHEMA_STATEMENTS: list[str] = [
    "CREATE INDEX FOR (u:User) ON (u.id)",
    "CREATE INDEX FOR (g:Group) ON (g.id)",
    "CREATE INDEX FOR (g:Group) ON (g.name)",
    "CREATE INDEX FOR (r:JoinRequest) ON (r.id)",
    "CREATE INDEX FOR (p:Post) ON (p.id)",
]
