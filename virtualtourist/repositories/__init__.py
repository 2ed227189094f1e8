"""
Repositories package

Each repository encapsulates database operations for a model:
- pin_repository.py
- photo_repository.py
- mapregion_repository.py

Usage:
    from virtualtourist.repositories.pin_repository import PinRepository
    pins = PinRepository.get_all()
"""
