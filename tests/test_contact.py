from nested_backend.models import Contact


def test_submit_contact(client):
    data = {'name': 'Tester', 'email': 'test@nestedhomes.com', 'message': 'Hello there'}
    r = client.post('/api/contact', json=data)
    assert r.status_code == 201
    body = r.get_json()
    assert body['message'] == 'Contact submitted'
    contact = body['contact']
    assert contact['name'] == 'Tester'
    assert contact['email'] == 'test@nestedhomes.com'
    assert contact['message'] == 'Hello there'
    assert isinstance(contact['id'], int)
    assert contact['created_at'] is not None


def test_submit_contact_message_only(client):
    r = client.post('/api/contact', json={'message': 'Anonymous note'})
    assert r.status_code == 201
    contact = r.get_json()['contact']
    assert contact['name'] is None
    assert contact['email'] is None


def test_contact_strips_markup_from_name(client):
    r = client.post('/api/contact', json={'name': '<b>Ada</b>', 'message': 'hi'})
    assert r.get_json()['contact']['name'] == 'Ada'


def test_contact_requires_message(client):
    r = client.post('/api/contact', json={'name': 'Tester', 'message': '  '})
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Message is required'
    assert Contact.query.count() == 0


def test_contact_invalid_json(client):
    r = client.post('/api/contact', data='nope', content_type='application/json')
    assert r.status_code == 400


def test_contact_is_append_only(client):
    for text in ('first', 'second'):
        client.post('/api/contact', json={'message': text})
    assert [c.message for c in Contact.query.order_by(Contact.id)] == ['first', 'second']


def test_contact_get_is_405(client):
    r = client.get('/api/contact')
    assert r.status_code == 405
    assert r.get_json()['error'] == 'method_not_allowed'
