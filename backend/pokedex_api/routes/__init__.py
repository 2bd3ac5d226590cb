# Routes package init
"""
Pokedex API — API Routes Package
=================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource; main.py mounts the resource
       routers under settings.api_prefix.

Route Inventory:
    - pokemon.py:  GET    /pokemon/types
                   GET    /pokemon
                   POST   /pokemon
                   GET    /pokemon/{id}
                   PATCH  /pokemon/{id}   (PUT too)
                   DELETE /pokemon/{id}
    - items.py:    GET    /pokemon/{pokemon_id}/items
                   POST   /pokemon/{pokemon_id}/items
                   PATCH  /items/{id}     (PUT too)
                   DELETE /items/{id}
    - moves.py:    GET    /moves
                   GET    /moves/{id}
                   DELETE /moves/{id}
    - health.py:   GET    /health         (not prefixed)

Design Principle:
    Routes are THIN: translate parameters, call a service, pick a status code.
"""
