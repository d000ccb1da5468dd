"""Visual predator agents for a colour-polymorphism predator/prey model."""
