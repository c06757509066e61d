"""Static NISD campus lists used to build the category registry.

These lists are loaded once at import time and never mutated. Names must
match the campus dropdown labels of the request form exactly.
"""

ELEMENTARY_CAMPUSES = (
    "Adams Hill",
    "Allen",
    "Aue",
    "Beard",
    "Behlau",
    "Blattman",
    "Boldt",
    "Boone",
    "Brauchle",
    "Braun Station",
    "Burke",
    "Cable",
    "Carlos Coon",
    "Carnahan",
    "Carson",
    "Chumbley",
    "Cody",
    "Cole",
    "Colonies North",
    "Driggers",
    "Ellison",
    "Elrod",
    "Esparza",
    "Evers",
    "Fernandez",
    "Fields",
    "Fisher",
    "Forester",
    "Franklin",
    "Galm",
    "Glass",
    "Glenn",
    "Glenoaks",
    "Hatchett",
    "Helotes",
    "Henderson",
    "Hoffmann",
    "Howsman",
    "Kallison",
    "Knowlton",
    "Krueger",
    "Kuentz",
    "Langley",
    "Leon Springs",
    "Leon Valley",
    "Lewis",
    "Lieck",
    "Linton",
    "Locke Hill",
    "Los Reyes",
    "Martin",
    "Mary Hull",
    "May",
    "McAndrew",
    "McDermott",
    "Mead",
    "Meadow Village",
    "Michael",
    "Mireles",
    "Mora",
    "Murnin",
    "Myers",
    "Nichols",
    "Northwest Crossing",
    "Oak Hills Terrace",
    "Ott",
    "Passmore",
    "Powell",
    "Raba",
    "Reed",
    "Rhodes",
    "Scarborough",
    "Scobee",
    "Steubing",
    "Thornton",
    "Timberwilde",
    "Tomlinson",
    "Valley Hi",
    "Villarreal",
    "Wanke",
    "Ward",
    "Wernli",
    "Westwood Terrace",
)

MIDDLE_CAMPUSES = (
    "Bernal",
    "Briscoe",
    "Connally",
    "Folks",
    "Hector Garcia",
    "Hobby",
    "Hobby Magnet",
    "Jefferson",
    "Jones",
    "Jones Magnet",
    "Jordan",
    "Jordan Magnet",
    "Luna",
    "Neff",
    "Pease",
    "Rawlinson",
    "Rayburn",
    "Ross",
    "Rudder",
    "Stevenson",
    "Stinson",
    "Stinson Magnet",
    "Straus",
    "Vale",
    "Zachry",
    "Zachry Magnet",
)

HIGH_CAMPUSES = (
    "Agriculture Academy",
    "Brandeis",
    "Brennan",
    "CAST Teach",
    "Chavez Excel Academy",
    "Clark",
    "Communications Arts",
    "Construction Careers Academy",
    "Harlan",
    "Health Careers",
    "Holmes",
    "John Jay",
    "John Jay Early College",
    "John Jay Science and Engineering Academy",
    "Marshall",
    "Marshall Law and Medical Services",
    "NSITE",
    "O'Connor",
    "Sotomayor",
    "Stevens",
    "Taft",
    "Warren",
)

# Special programs serving mixed grade bands
SPECIAL_SCHOOLS = (
    "Holmgreen Center Middle School",
    "Holmgreen Center High School",
    "Northside Alternative HS",
    "Northside Alternative MS",
    "Reddix Center",
)

# Special schools that go to the middle-school sheet; the rest go to high school
MIDDLE_SPECIAL_SCHOOLS = (
    "Holmgreen Center Middle School",
    "Northside Alternative MS",
)
