# sdk/adminclient.py
import requests
from typing import Any, Dict, Optional
from rich import print


class AdminApiError(requests.exceptions.HTTPError):
    """HTTP error carrying the server's `detail` message."""

    def __init__(self, status_code: int, detail: str, response=None):
        super().__init__(detail, response=response)
        self.status_code = status_code
        self.detail = detail


class AdminClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _check(self, r: requests.Response) -> Dict[str, Any]:
        if r.status_code >= 400:
            try:
                detail = r.json().get("detail", r.text)
            except ValueError:
                detail = r.text
            raise AdminApiError(r.status_code, str(detail), response=r)
        return r.json()

    def reset(self):
        return self._check(self.session.post(f"{self.base_url}/reset", timeout=self.timeout))

    def view(self):
        return self._check(self.session.get(f"{self.base_url}/view", timeout=self.timeout))

    # Session
    def login(self, email: str, password: str):
        r = self.session.post(f"{self.base_url}/login", json={"email": email, "password": password}, timeout=self.timeout)
        return self._check(r)

    def logout(self):
        return self._check(self.session.post(f"{self.base_url}/logout", timeout=self.timeout))

    # Products
    def submit_product(self, name: str, category: str, price: str, description: str, image_url: str = ""):
        r = self.session.post(f"{self.base_url}/products", json={
            "name": name, "category": category, "price": price,
            "imageUrl": image_url, "description": description,
        }, timeout=self.timeout)
        return self._check(r)

    def edit_product(self, product_id: str):
        r = self.session.post(f"{self.base_url}/products/{product_id}/edit", timeout=self.timeout)
        return self._check(r)

    def cancel_edit(self):
        return self._check(self.session.post(f"{self.base_url}/products/edit/cancel", timeout=self.timeout))

    def delete_product(self, product_id: str):
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return self._check(r)

    def find_product(self, name: str) -> Optional[Dict[str, Any]]:
        view = self.view()
        for row in view.get("table", {}).get("rows", []):
            if row["name"] == name:
                return row
        return None


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="storefront-admin client")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("view", help="Show the current view")

    li = subparsers.add_parser("login", help="Sign in as admin")
    li.add_argument("--email", required=True)
    li.add_argument("--password", required=True)

    subparsers.add_parser("logout", help="Sign out")

    ap = subparsers.add_parser("submit-product", help="Submit the product form (create, or update in edit mode)")
    ap.add_argument("--name", required=True)
    ap.add_argument("--category", required=True)
    ap.add_argument("--price", required=True, help="Free-form price, e.g. ₹150.00")
    ap.add_argument("--description", required=True)
    ap.add_argument("--image-url", default="")

    ep = subparsers.add_parser("edit-product", help="Load a product into the form")
    ep.add_argument("--product-id", required=True)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    args = parser.parse_args()
    c = AdminClient(base_url=args.base_url)

    if args.command == "view":
        print(c.view())
    elif args.command == "login":
        print(c.login(args.email, args.password))
    elif args.command == "logout":
        print(c.logout())
    elif args.command == "submit-product":
        print(c.submit_product(args.name, args.category, args.price, args.description, args.image_url))
    elif args.command == "edit-product":
        print(c.edit_product(args.product_id))
    elif args.command == "delete-product":
        print(c.delete_product(args.product_id))
