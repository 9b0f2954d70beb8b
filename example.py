"""Example usage of the protoclone library."""

from protoclone import ROOT

# A prototype with a constructor, a read-only constant and an accessor pair
def Shape(self, name="shape"):
    self.apply_super()
    self._name = name

def get_name(self):
    return self._name

def set_name(self, value):
    self._name = value.strip()

def area(self):
    return 0

def describe(self):
    return f"{self.name} with area {self.area()}"

shape = ROOT.clone(
    {
        "constructor": Shape,
        "(const) sides": 0,
        "_name": None,
        "(get) name": get_name,
        "(set) name": set_name,
        "area": area,
        "describe": describe,
    }
)

# A derived prototype that extends the constructor and overrides a method
def Square(self, size=1):
    self.apply_super(["square"])
    self.size = size

def square_area(self):
    return self.size ** 2

def square_describe(self):
    return "[" + self.call_super("describe") + "]"

square = shape.clone(
    {
        "constructor": Square,
        "(const) sides": 4,
        "size": None,
        "area": square_area,
        "describe": square_describe,
    }
)

unit = square.create(3)
print(unit.describe())                       # [square with area 9]
print(unit.to_string())                      # {"_name": "square", "size": 3}
print(unit.can("area").same_as(square))      # True

# Copy the instance together with its prototypes into one flat object
flat = unit.copy(float("inf"), True)
print(flat.get_own_property_names())

# Mix a plain class straight into an instance
class Colored:
    color = "red"

    def paint(self, color):
        self.color = color

painted = square.create(2).mix(Colored, False)
painted.paint("blue")
print(painted.color, painted.area())         # blue 4
