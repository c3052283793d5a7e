from .models import Homography, Line2D, Model
