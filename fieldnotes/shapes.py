"""Value types with methods, inheritance standing in for embedding, and a shared protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Describer(Protocol):
    """Anything that can describe itself."""

    def describe(self) -> str: ...


@dataclass
class Rectangle:
    """An axis-aligned rectangle."""

    width: float
    height: float

    def area(self) -> float:
        """Return width times height."""
        return self.width * self.height

    def scale(self, factor: float) -> None:
        """Multiply both sides by factor in place."""
        self.width *= factor
        self.height *= factor


@dataclass
class Animal:
    """A named animal."""

    name: str

    def speak(self) -> str:
        """Return the animal's generic sound line."""
        return f"{self.name} makes a sound"


@dataclass
class Dog(Animal):
    """An animal with a breed that can also bark."""

    breed: str = ""

    def bark(self) -> str:
        """Return the dog's bark line."""
        return f"{self.name} says woof!"


@dataclass(frozen=True)
class User:
    """A user that describes itself by name."""

    name: str

    def describe(self) -> str:
        """Return a description naming the user."""
        return "User: " + self.name


@dataclass(frozen=True)
class Product:
    """A product that describes itself by id."""

    id: int

    def describe(self) -> str:
        """Return a description naming the product id."""
        return f"Product ID: {self.id}"