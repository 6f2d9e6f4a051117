from taskboard.models import UserCreate

SAMPLE_USERS: list[UserCreate] = [
    UserCreate(
        name="John Doe",
        project="E-Commerce Platform Redesign",
        tasks=["Wireframe Review", "User Testing Session", "Prototype Development"],
    ),
    UserCreate(
        name="Jane Smith",
        project="Mobile App Development",
        tasks=["Design Documentation", "User Research", "Prototype Testing"],
    ),
    UserCreate(
        name="Mike Johnson",
        project="Dashboard Analytics",
        tasks=[
            "Data Visualization",
            "Performance Optimization",
            "User Interface Design",
        ],
    ),
]
