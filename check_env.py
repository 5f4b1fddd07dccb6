#!/usr/bin/env python3
"""Check the .env file used for Supabase configuration, creating a template if missing."""

import os
import sys
from pathlib import Path

ENV_TEMPLATE = """# Supabase Configuration (required)
# Get these from: https://supabase.com/dashboard -> Your Project -> Settings -> API
DISPATCH_SUPABASE_URL=https://your-project-id.supabase.co
DISPATCH_SUPABASE_KEY=your-anon-or-service-role-key-here

# API Configuration
DISPATCH_API_PREFIX=/api
# DISPATCH_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list
# DISPATCH_FRONTEND_ALLOWED_ORIGINS=http://localhost:5173,http://127.0.0.1:5173

# Accounts
DISPATCH_MANAGER_ACCESS_CODE=BORDA777
DISPATCH_PASSWORD_RESET_REDIRECT_URL=http://localhost:5173/redefinir-senha

# Delivery workflow
# DISPATCH_STRICT_STATUS_TRANSITIONS=false
# DISPATCH_COMPENSATE_PARTIAL_WRITES=true
"""

SECRET_KEYS = ("DISPATCH_SUPABASE_KEY", "DISPATCH_MANAGER_ACCESS_CODE")


def _masked(line):
    name, _, value = line.partition("=")
    value = value.strip()
    if name.strip() in SECRET_KEYS and len(value) > 8:
        return f"{name}={value[:4]}...{value[-4:]}"
    return line


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Dispatch Environment Variables Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Please edit .env and add your Supabase credentials!")
        return

    print(f"✅ Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_masked(line))
    print("-" * 60)
    print()

    for name in ("DISPATCH_SUPABASE_URL", "DISPATCH_SUPABASE_KEY"):
        if os.getenv(name):
            print(f"✅ {name} set in the process environment")
        else:
            print(f"ℹ️  {name} not in the process environment (the .env file is used)")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from pizza_dispatch.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        sys.exit(1)

    if settings.supabase_url and settings.supabase_key:
        print("=" * 60)
        print("✅ SUCCESS: Supabase is configured!")
        print("=" * 60)
    else:
        print("=" * 60)
        print("❌ ERROR: Supabase is NOT configured")
        print("=" * 60)
        print("1. Make sure .env exists in the project root")
        print("2. Make sure variables start with the DISPATCH_ prefix")
        print("3. Restart the backend after editing .env")


if __name__ == "__main__":
    main()
