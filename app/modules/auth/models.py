# Supabase tables: users, profiles, sessions
# This file documents the expected database schema
# Actual operations go through the CredentialStore in app/database

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, generated by the API, not the database)
- email: text (unique, not null) - stored exactly as submitted
- password: text (not null) - bcrypt hash, never returned by the API
- name: text (not null)
- phone: text (nullable)
- created_at: timestamptz (not null)

profiles:
- id: uuid (primary key)
- user_id: uuid (unique, not null, references users.id on delete cascade)
- avatar: text (nullable)
- created_at: timestamptz (not null)

sessions:
- id: uuid (primary key)
- user_id: uuid (not null, references users.id on delete cascade)
- ip_address: text (nullable)
- user_agent: text (nullable)
- last_activity: timestamptz (not null)

The unique constraint on users.email is what guarantees one account per
email; the service's lookup before insert is only a fast path. The unique
constraint on profiles.user_id makes the user/profile relation one-to-one.

    create table users (
        id uuid primary key,
        email text not null unique,
        password text not null,
        name text not null,
        phone text,
        created_at timestamptz not null default now()
    );
    create table profiles (
        id uuid primary key,
        user_id uuid not null unique references users(id) on delete cascade,
        avatar text,
        created_at timestamptz not null default now()
    );
    create table sessions (
        id uuid primary key,
        user_id uuid not null references users(id) on delete cascade,
        ip_address text,
        user_agent text,
        last_activity timestamptz not null default now()
    );
"""

USERS_TABLE = "users"
PROFILES_TABLE = "profiles"
SESSIONS_TABLE = "sessions"

# Columns safe to return to clients; never includes the password hash
USER_PUBLIC_COLUMNS = "id, email, name, phone, created_at"
