from naviera.models.user import User
from naviera.models.client import Client
from naviera.models.route import Route
from naviera.models.vessel import Vessel, VesselRoute
from naviera.models.boarding_port import BoardingPort
from naviera.models.sale import Sale
from naviera.models.cancellation import Cancellation
from naviera.models.boarding_control import BoardingControl

# This makes the models directory a Python package and ensures all models are loaded
