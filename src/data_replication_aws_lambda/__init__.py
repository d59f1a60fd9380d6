"""Serverless handlers that replicate data between S3 buckets and PostgreSQL databases.

Provides an S3 object replicator, a bucket lister, a table mirror that copies an
inventory table from a source database to a target database, and a seeder that
populates an empty inventory table with default rows.
"""
