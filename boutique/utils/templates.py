from fastapi.templating import Jinja2Templates
from boutique.config import TEMPLATES_DIR
from boutique.notifications.messages import format_amount

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["amount"] = format_amount
