# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the package with test dependencies
# python -m pip install -e ".[test]"

# Run the full test suite (uses a throwaway SQLite database per test)
# python -m pytest

# Run focused test files
# python -m pytest tests/test_auth_service.py
# python -m pytest tests/test_tokens.py tests/test_passwords.py
# python -m pytest tests/test_routes_users.py tests/test_routes_subscriptions.py

# Start the API locally (with env vars loaded from .env)
# python -m dotenv run -- python -m uvicorn app.api:app --reload
# python main.py

# Local database without Postgres
# DATABASE_URL=sqlite:///./accounts.db COOKIE_SECURE=false python main.py

# Register, log in, rotate the refresh token
# curl -F username=alice -F email=alice@x.com -F password=Secret123 -F fullName="Alice A" -F avatar=@avatar.png http://127.0.0.1:8000/api/v1/users/register
# curl -c jar.txt -H 'Content-Type: application/json' -d '{"username":"alice","password":"Secret123"}' http://127.0.0.1:8000/api/v1/users/login
# curl -b jar.txt -c jar.txt -X POST http://127.0.0.1:8000/api/v1/users/refresh-token
