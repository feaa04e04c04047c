#!/usr/bin/env python
from sdk.adminclient import AdminClient, AdminApiError


def main():
    c = AdminClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()
    print(c.view())

    # -----------------------------
    # Wrong password
    # -----------------------------
    print("\nLogging in with a wrong password...")
    try:
        c.login("admin@example.com", "nope")
    except AdminApiError as e:
        print(f"{e.status_code}: {e.detail}")

    # -----------------------------
    # Login
    # -----------------------------
    print("\nLogging in as admin...")
    print(c.login("admin@example.com", "admin123")["message"])

    # -----------------------------
    # Add products
    # -----------------------------
    print("\nAdding products...")
    c.submit_product("Paracetamol", "Allopathic Medicines", "₹20", "Pain relief")
    c.submit_product("Cough Syrup", "Syrups", "₹95", "Soothes dry cough")
    view = c.submit_product("Baby Lotion", "Baby Care Products", "₹150.00", "Gentle moisturiser",
                            image_url="https://example.com/lotion.jpg")
    for row in view["table"]["rows"]:
        print(f"  {row['category']:<24} {row['name']:<14} {row['price']}")

    # -----------------------------
    # Edit a product
    # -----------------------------
    print("\nEditing Cough Syrup's price...")
    syrup = c.find_product("Cough Syrup")
    c.edit_product(syrup["id"])
    view = c.submit_product("Cough Syrup", "Syrups", "₹89", "Soothes dry cough")
    print(view["message"], c.find_product("Cough Syrup")["price"])

    # -----------------------------
    # Delete a product
    # -----------------------------
    print("\nDeleting Baby Lotion...")
    view = c.delete_product(c.find_product("Baby Lotion")["id"])
    print(view["message"], [r["name"] for r in view["table"]["rows"]])

    # -----------------------------
    # Logout
    # -----------------------------
    print("\nLogging out...")
    print(c.logout())


if __name__ == "__main__":
    main()
