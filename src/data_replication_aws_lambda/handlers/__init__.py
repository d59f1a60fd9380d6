"""Lambda handler implementations.

- S3 object replication and bucket listing
- Database table mirroring and seeding
"""
