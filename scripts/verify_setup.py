"""Verify that the environment is ready before managing deploy keys."""
import asyncio
import os
import sys
from dotenv import load_dotenv
from deploykeys.domain.errors import DeployKeysError
from deploykeys.infrastructure.aiohttp_connection import AiohttpApiConnection
from deploykeys.infrastructure.settings import ClientSettings

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


def check_environment_variables():
    """Check required environment variables."""
    print("Checking environment variables...")

    required_vars = ["GITHUB_TOKEN"]
    optional_vars = ["GITHUB_API_URL", "GITHUB_TIMEOUT", "GITHUB_USER_AGENT"]

    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        print(f"❌ Missing required environment variables: {', '.join(missing)}")
        return False

    print("✅ Required environment variables set")

    for var in optional_vars:
        if os.getenv(var):
            print(f"   {var}: {os.getenv(var)}")

    return True


def check_settings():
    """Check that the settings parse."""
    print("\nChecking client settings...")

    try:
        settings = ClientSettings.from_env()
    except DeployKeysError as e:
        print(f"❌ Invalid settings: {e}")
        return False

    print(f"✅ API URL: {settings.base_url} (timeout {settings.timeout_seconds:g}s)")
    return True


async def _fetch_rate_limit() -> dict:
    connection = AiohttpApiConnection(ClientSettings.from_env())
    try:
        response = await connection.request("GET", "/rate_limit")
        return response.body
    finally:
        await connection.close()


def check_api_access():
    """Call the rate limit endpoint to verify the token and connectivity."""
    print("\nChecking API access...")

    try:
        body = asyncio.run(_fetch_rate_limit())
    except Exception as e:
        print(f"❌ Failed to reach the GitHub API: {e}")
        return False

    core = body.get("resources", {}).get("core", {})
    print("✅ GitHub API reachable")
    print(f"   Rate limit: {core.get('remaining', '?')}/{core.get('limit', '?')}")
    return True


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("Deploy Keys - Setup Verification")
    print("=" * 60)

    checks = [
        ("Environment Variables", check_environment_variables),
        ("Client Settings", check_settings),
        ("API Access", check_api_access),
    ]

    results = {}
    for name, check_func in checks:
        results[name] = check_func()

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    if all(results.values()):
        print("\n✅ All checks passed!")
        print("\nNext steps:")
        print("  python manage_deploy_keys.py list owner/name")
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Set GITHUB_TOKEN: export GITHUB_TOKEN=your_token")
        print("  - Point GITHUB_API_URL at your GitHub Enterprise host if needed")
        sys.exit(1)


if __name__ == "__main__":
    main()
