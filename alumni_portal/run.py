import uvicorn
from alumni_portal import create_app

# Create the FastAPI app using the create_app function
app = create_app()

# Add an endpoint to list all routes (endpoints)
@app.get("/list-endpoints")
def list_endpoints():
    endpoints = []
    for route in app.router.routes:
        endpoints.append({
            "path": route.path,
            "name": route.name,
            "methods": sorted(getattr(route, "methods", None) or [])
        })
    return {"endpoints": endpoints}

if __name__ == "__main__":
    uvicorn.run("alumni_portal.run:app", host="0.0.0.0", port=8000, reload=True)
