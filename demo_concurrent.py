import asyncio

from app.backend import build_backend
from app.config import Settings, configure_logging


async def main():
    # in-process, with a slow store so a write is still in flight at logout
    settings = Settings(store_latency_seconds=0.5)
    configure_logging(settings)
    backend = build_backend(settings)
    await backend.start()
    dash = backend.dashboard

    await dash.submit_login(settings.admin_email, settings.admin_password)
    await dash.submit_product(name="Paracetamol", category="Allopathic Medicines",
                              price="₹20", description="Pain relief")
    product = dash.products[0]
    print(f"\n📦 Stored: {product.name} {product.price} (created {product.created_at:%H:%M:%S})")

    dash.request_edit(product.id)
    print("\n⚡ Submitting a price change and logging out before it lands...")
    write = asyncio.create_task(dash.submit_product(price="₹25"))
    await asyncio.sleep(0.1)
    await dash.submit_logout()
    print(f"Dashboard state after logout: {dash.state.value}")

    await write
    stored = backend.store.documents(backend.repository.collection_path)[product.id]
    print(f"✅ Write still committed: price={stored['price']}")
    print(f"🧾 Dashboard renders: {dash.render().kind} view, {len(dash.products)} products cached")

    await backend.aclose()


if __name__ == "__main__":
    asyncio.run(main())
