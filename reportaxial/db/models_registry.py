# file: reportaxial/db/models_registry.py
# Importa todos os models para que fiquem registados no Base.metadata

from reportaxial.models.users import User  # noqa: F401
from reportaxial.models.stores import Store  # noqa: F401
from reportaxial.models.suppliers import Supplier  # noqa: F401
from reportaxial.models.problems import Problem  # noqa: F401
from reportaxial.models.responses import Response  # noqa: F401
from reportaxial.models.messages import Message  # noqa: F401
