"""Domain layer - core business logic and interfaces.

This layer contains:
- Domain entities (Order, OrderItem, Fee)
- Enumerations (PaymentMethod, OrderStatus)
- Domain exceptions
- Repository and provider interfaces (Strategy Pattern)
"""
