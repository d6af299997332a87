import logging

from .models import Employee

logger = logging.getLogger(__name__)

PRODUCT_ABILITIES = {
    'product_access', 'product_create', 'product_update', 'product_delete', 'product_import',
}
WAREHOUSE_ABILITIES = {
    'warehouse_access', 'warehouse_create', 'warehouse_update', 'warehouse_delete',
}

ROLE_ABILITIES = {
    Employee.MANAGER: PRODUCT_ABILITIES | WAREHOUSE_ABILITIES,
    Employee.INVENTORY: {
        'product_access', 'product_create', 'product_update', 'product_import',
        'warehouse_access',
    },
    Employee.SALES: {'product_access', 'warehouse_access'},
}


class RoleGate:
    '''Answers "may this actor do that" from the actor's role'''

    def __init__(self, role_abilities=None):
        self.role_abilities = role_abilities or ROLE_ABILITIES

    def abilities_for(self, actor):
        if actor is None or not actor.is_authenticated or not actor.is_active:
            return set()
        if actor.is_superuser:
            return set().union(*self.role_abilities.values())
        return set(self.role_abilities.get(getattr(actor, 'role', None), ()))

    def can(self, actor, ability):
        return ability in self.abilities_for(actor)


gate = RoleGate()
