import pytest

from fieldnotes.shapes import Animal, Dog, Product, Rectangle, User


def test_rectangle_area():
    assert Rectangle(3, 4).area() == 12


def test_scale_changes_sides_by_factor():
    rect = Rectangle(3, 4)
    rect.scale(2)
    assert rect == Rectangle(6, 8)


@pytest.mark.parametrize("factor", [2, 3, 0.5])
def test_scale_multiplies_area_by_square_of_factor(factor):
    rect = Rectangle(3, 4)
    before = rect.area()
    rect.scale(factor)
    assert rect.area() == pytest.approx(before * factor * factor)


def test_scale_by_one_keeps_rectangle():
    rect = Rectangle(2.5, 7)
    rect.scale(1)
    assert rect == Rectangle(2.5, 7)


def test_dog_inherits_speak_from_animal():
    dog = Dog(name="Buddy", breed="Beagle")
    assert dog.speak() == Animal(name="Buddy").speak()
    assert dog.speak().startswith("Buddy ")


def test_dog_bark_names_the_dog():
    dog = Dog(name="Buddy", breed="Beagle")
    assert dog.bark().startswith("Buddy ")
    assert dog.bark().endswith("woof!")


def test_dog_keeps_breed_and_is_an_animal():
    dog = Dog(name="Buddy", breed="Beagle")
    assert dog.breed == "Beagle"
    assert isinstance(dog, Animal)
    assert dog.name == "Buddy"


def test_user_describe():
    user = User(name="Alice")
    assert user.describe().startswith("User: ")
    assert user.describe().endswith("Alice")


def test_product_describe():
    assert Product(id=101).describe() == "Product ID: 101"


def test_describers_share_interface():
    items = [User(name="Alice"), Product(id=101)]
    descriptions = [item.describe() for item in items]
    assert descriptions[0].startswith("User: ")
    assert descriptions[1].startswith("Product ID: ")