# Services package init
"""
Pokedex API — Services Layer
=============================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Separation of concerns — routes handle HTTP and parameter translation,
       services handle validation, associations and cascades.

Service Inventory:
    - AssociationManager: relationship loading, move-set reconciliation,
      ordered cascade deletes
    - PokemonService: Pokemon CRUD and the types list
    - ItemService: Item CRUD scoped to a Pokemon
    - MoveService: Move listing, detail and guarded deletion
    - integrity: uniqueness pre-checks and IntegrityError → field mapping
"""
