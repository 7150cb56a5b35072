"""
Génère la valeur de ADMIN_PASSWORD_HASH.

Usage:
    python -m boutique.admin.hash_password "<mot de passe>"
"""
import sys

from boutique.admin.service import hash_password

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    print(f"ADMIN_PASSWORD_HASH={hash_password(sys.argv[1])}")
