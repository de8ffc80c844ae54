"""
Fábricas simples de objetos para os testes de traspasso.
"""
from decimal import Decimal
from itertools import count

from accounts.models import User, UserProfile
from transfers.models import Transfer, TransferStatus
from vehicles.models import Vehicle

_seq = count(1)


def make_user(username, role=User.Role.OWNER, complete_profile=True, **extra):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@carid.test",
        password="senha-teste",
        first_name=username.capitalize(),
        role=role,
        **extra,
    )
    if complete_profile:
        UserProfile.objects.create(user=user, document_number=f"100{next(_seq):07d}", city="Popayán")
    return user


def make_vehicle(owner, **extra):
    n = next(_seq)
    data = {
        "brand": "Renault",
        "model": "Logan",
        "year": 2019,
        "color": "Branco",
        "license_plate": f"TST{n:03d}",
        "vin": f"9BWZZZ377VT{n:06d}",
        "owner": owner,
    }
    data.update(extra)
    return Vehicle.objects.create(**data)


def make_transfer(vehicle, seller, buyer, status=TransferStatus.PENDING_BUYER_ACCEPTANCE, **extra):
    return Transfer.objects.create(
        vehicle=vehicle,
        seller=seller,
        buyer=buyer,
        seller_profile=seller.profile,
        buyer_profile=buyer.profile,
        status=status,
        sale_price=extra.pop("sale_price", Decimal("35000000.00")),
        **extra,
    )
