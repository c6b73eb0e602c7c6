import asyncio
import os
import sys

# Add project root to path so we can import crmdesk
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crmdesk.core.config import settings
from crmdesk.core.errors import CRMError
from crmdesk.integrations.backend.apper import ApperClient
from crmdesk.schemas import ContactFilters
from crmdesk.services.workspace import build_workspace


async def main():
    print("--- Verifying Apper record API ---")
    settings.require_backend_credentials()

    async with ApperClient(
        project_id=settings.apper_project_id,
        public_key=settings.apper_public_key,
        base_url=settings.apper_api_url,
        timeout=settings.apper_timeout_seconds,
    ) as backend:
        workspace = build_workspace(backend, page_size=settings.page_size)

        for store in (workspace.contacts, workspace.companies, workspace.deals, workspace.tasks):
            print(f"\nLoading {store.entity} records...")
            if await store.refresh():
                print(f"✅ {len(store.items)} {store.entity} records.")
            else:
                print(f"❌ {store.entity} load failed: {store.error}")

        term = os.getenv("TEST_SEARCH", "a")
        print(f"\nSearching contacts for {term!r} on the server...")
        try:
            found = await workspace.contacts.gateway.list(ContactFilters(search_term=term))
            print(f"✅ {len(found)} matching contacts.")
        except CRMError as e:
            print(f"❌ Search failed: {e}")

        print("\nFetching recent activities...")
        try:
            recent = await workspace.activities.recent(settings.recent_activity_limit)
            print(f"✅ {len(recent)} recent activities.")
        except CRMError as e:
            print(f"❌ Activity feed failed: {e}")

    print("\n--- Done ---")


if __name__ == "__main__":
    asyncio.run(main())
