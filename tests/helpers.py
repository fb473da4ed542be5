from catalog_service.schemas import ProductIn


def make_product(name="Hammer", price=10.0, quantity=1, category="Tools", description=None) -> ProductIn:
    return ProductIn(name=name, description=description, price=price, quantity=quantity, category=category)
