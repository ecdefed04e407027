from roletrando import create_app, socketio
from roletrando.services import get_services

app = create_app()

if __name__ == '__main__':
    # Ranking or word storage problems are fatal here, before any client connects
    with app.app_context():
        get_services().load()
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'])
